from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="cluster-validation",
    version="0.1.0",
    description="Permutation-test and mutual-information validation of k-means clusters on categorical survey data",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.22",
        "python-dotenv>=1.0.0",
        "tqdm>=4.60",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "scikit-learn>=1.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
        ]
    },
)
