[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pocketpet"
version = "0.1.0"
description = "Behaviour core for a small desktop companion robot: face detection and tracking, pan/tilt servo control, orientation sensing, a pomodoro timer, photo storage and album, battery monitoring and an HTTP control panel."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robot",
    "companion",
    "face-tracking",
    "servo",
    "pomodoro",
    "pca9685",
    "imu",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pocketpet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
