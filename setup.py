"""
Setup script for robo-control package.

This package provides DC motor models, exactly discretized mechanism
simulations, and the PID/feedforward/trajectory primitives used to
control them without real hardware.
"""

from setuptools import setup, find_packages
import os

# Read long description from README
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Read requirements
with open(os.path.join(here, 'requirements.txt'), encoding='utf-8') as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

# Split core requirements from test and plotting extras
core_requirements = []
dev_requirements = []
plotting_requirements = []

for req in requirements:
    if any(dev_pkg in req for dev_pkg in ['pytest', 'black', 'flake8', 'mypy']):
        dev_requirements.append(req)
    elif any(plot_pkg in req for plot_pkg in ['matplotlib']):
        plotting_requirements.append(req)
    else:
        core_requirements.append(req)

setup(
    name='robo-control',
    version='1.0.0',
    description='Actuator simulation and control primitives for robot mechanisms',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Robo Control Team',

    packages=find_packages(where='src'),
    package_dir={'': 'src'},

    # Core dependencies
    install_requires=core_requirements,

    # Optional dependencies
    extras_require={
        'plotting': plotting_requirements,
        'dev': dev_requirements + plotting_requirements,
        'all': plotting_requirements + dev_requirements,
    },

    python_requires='>=3.8',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],

    keywords='robotics control simulation pid feedforward dc-motor trajectory state-space',
)
