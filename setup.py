from setuptools import setup, find_packages

setup(
    name="totpgen",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["totpgen_cli"],
    include_package_data=True,
    install_requires=[
        "cryptography>=42.0.5",
        "python-dotenv>=1.0.1",
    ],
    extras_require={
        "tests": [
            "pytest>=7.4",
            "pyotp>=2.9.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "totpgen=totpgen_cli:main",
        ],
    },
    python_requires=">=3.8",
)
