class InvariantViolation(RuntimeError):
    """
    Raised when the engine reaches a state its own rules can never produce,
    e.g. consuming a die that is not in the remaining pool. This signals a
    defect in move generation, never a bad action from the caller.
    """
