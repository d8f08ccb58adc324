from setuptools import setup, find_packages

setup(
    name="upstox_client",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pandas",
        "requests",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
