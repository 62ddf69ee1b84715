import os

from setuptools import setup, find_packages

# Set up the package
setup(
    name="wavelet-analysis",
    version="0.1.0",
    author="NVIDIA Jetson Workload Team",
    author_email="",
    description="Continuous wavelet transform engine: direct and FFT convolution, complex analysis, "
                "adaptive scale selection and inverse transforms",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.6.0",
        "pywavelets>=1.1.0",
    ],
    extras_require={
        "dev": ["pytest"],
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
