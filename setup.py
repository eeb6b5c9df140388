from setuptools import setup, find_packages

setup(
    name="reposcope",
    version="0.3.0",
    packages=find_packages(include=["reposcope", "reposcope.*"]),
    install_requires=[
        "python-dotenv>=1.0.0",
        "click>=8.1.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "aiofiles>=23.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "hypothesis>=6.80.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "reposcope=reposcope.cli.main:main",
        ]
    },
    author="Nick Seal",
    author_email="nick@pueo.io",
    description="Multi-repository MCP gateway: discovers local repositories and serves their tools under one namespaced endpoint.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
