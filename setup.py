from setuptools import setup

setup(
    name="gym_backgammon",
    version="0.0.1",
    packages=["gym_backgammon", "gym_backgammon.envs"],
    install_requires=[
        "numpy>=1.20.0",
        "gymnasium>=1.1.1",
    ],
    extras_require={
        "test": [
            "pytest",
            "colorama",
        ],
    },
    entry_points={
        "console_scripts": [
            "backgammon-cli=gym_backgammon.cli:main",
        ],
    },
    description="A backgammon rules engine with a Gymnasium environment",
)
