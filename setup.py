from setuptools import setup

setup(
    name="moe-lang",
    version="0.1.0",
    description="Brace-delimited UI markup that compiles to a standalone HTML page",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['moe'],
    python_requires=">=3.8",
    install_requires=[
        "watchdog",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["moe=moe.__main__:main"],
    },
)
