"""
Wellness Tracker API - Setup Configuration
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="wellness-tracker",
    version="1.0.0",
    author="Wellness Tracker Team",
    author_email="contact@example.com",
    description="REST API for habits, wellness metrics, reminders, schedules and yoga practice",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["wellness_tracker", "wellness_tracker.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wellness-tracker=wellness_tracker.main:run",
        ],
    },
)
