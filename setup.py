from setuptools import setup, find_packages

setup(
    name="hostedsearch",
    version="1.7.6",
    description="Client for the hosted search REST API with host failover and task polling",
    author="Your Name",
    author_email="you@example.com",
    packages=find_packages(include=["hostedsearch", "hostedsearch.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "tenacity>=8.2",
        "keyring>=24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
            "pytest-socket>=0.6",
        ],
    },
    license="MIT",
)
