"""
Setup configuration for the camwake package.
"""

import platform
from setuptools import setup, find_packages

# Read README for long description
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "USB camera presence detection with application auto-launch"

# Platform-specific dependencies
def get_platform_dependencies():
    """Get platform-specific dependencies based on the current system."""
    deps = []

    system = platform.system().lower()

    if system == "linux":
        # Linux enumerates USB devices and interfaces through udev
        deps.extend([
            "pyudev>=0.21.0",
        ])

    return deps


def get_platform_extras():
    """Get extra dependency groups."""
    return {
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.900",
            "ruff>=0.1.0",
        ],
        "test": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
        ],
    }

# Core dependencies required on all platforms
install_requires = [
    "click>=8.0.0",  # CLI framework
    "pyusb>=1.2.0",  # libusb descriptor enumeration (non-Linux backend)
] + get_platform_dependencies()

setup(
    name="camwake",
    version="0.1.0",
    author="camwake Development Team",
    description="USB camera presence detection with application auto-launch",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Video :: Capture",
        "Topic :: System :: Hardware :: Universal Serial Bus (USB)",
    ],
    keywords="camera usb uvc detection auto-launch",
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=get_platform_extras(),
    entry_points={
        "console_scripts": [
            "camwake=camwake.cli:main",
        ],
    },
    zip_safe=False,
)
