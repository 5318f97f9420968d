"""
Setup script for LAN Discovery - concurrent reachability sweep of a /24 subnet
"""

from setuptools import setup, find_packages

# Read requirements from requirements.txt
def read_requirements():
    try:
        with open('requirements.txt', 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    except FileNotFoundError:
        return ["PyYAML>=5.4"]

setup(
    name="lan-discovery",
    version="0.1.0",
    description="LAN Discovery - find reachable hosts on a /24 subnet",
    long_description="A small library and CLI that probes every host of a /24 subnet in parallel and reports which ones answered.",
    packages=find_packages(include=['lan_discovery', 'lan_discovery.*']),
    install_requires=read_requirements(),
    extras_require={
        "dev": [
            "pytest>=6.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'lan-discovery=lan_discovery:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.8",
)
