from setuptools import find_packages, setup

setup(
    name="prnotify",
    version="0.1.0",
    description="Push notifications for new comments and reviews on the pull requests you are involved in",
    packages=find_packages(include=["prnotify", "prnotify.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.2",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["prnotify=prnotify.cli:main"],
    },
)
