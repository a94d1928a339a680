from setuptools import setup, find_packages
setup(
    name="predio_tracker",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.100",
        "pydantic>=2",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": ["pytest>=7", "httpx>=0.24"],
    },
    entry_points={
        'console_scripts': [
            'predio-tracker=predio_tracker.__main__:_safe_main'
        ]
    }
)
