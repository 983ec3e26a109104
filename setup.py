"""
Setup script for SaltedAES.
"""

from setuptools import setup, find_namespace_packages

# Read the README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="saltedaes",
    version="1.0.0",
    author="Pang HQ",
    author_email="",
    description="Passphrase-based AES encryption with a self-describing random salt",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["saltedaes", "saltedaes.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Security :: Cryptography",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "saltedaes=saltedaes.main:main",
        ],
    },
    scripts=["run.py"],
    keywords="encryption aes salt pbkdf2 argon2 cryptography",
)
