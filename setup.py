# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="codeheatmap",
    version="1.0.0",
    description="Drillable treemap heatmap of per-file repository metrics",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["codeheatmap", "codeheatmap.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",  # Loading datasets served over HTTP
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'codeheatmap=codeheatmap.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
