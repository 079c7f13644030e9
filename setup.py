from setuptools import setup, find_packages

setup(
    name="framegen-compose",
    version="0.1.0",
    description="Image composition analysis: edges, regions of interest, color harmony, rule scoring, and ranked crop suggestions",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "Pillow>=10.0.0",
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
        "click>=8.1.0",
        "tqdm>=4.65.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "framegen=framegen.cli:cli",
        ],
    },
)
