"""Setup script for MessageLimiter package."""

from setuptools import setup, find_packages
import pathlib

# Get the long description from the README file
here = pathlib.Path(__file__).parent.resolve()
long_description = (here / "README.md").read_text(encoding="utf-8") if (here / "README.md").exists() else "MessageLimiter: fit chat conversations and tool definitions into a model's token window."

setup(
    name="message-limiter",
    version="0.1.0",
    description="Fit chat conversations and tool definitions into a model's token window",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="MessageLimiter Team",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="llm, tokens, context-window, truncation, tiktoken, ai",
    package_dir={"": "."},
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8, <4",
    install_requires=[
        "PyYAML>=6.0",
        "tiktoken>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "message-limiter=message_limiter.cli:main",
        ],
    },
)
