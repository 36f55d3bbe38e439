#!/usr/bin/env python
from setuptools import setup


setup(
    name='stochgametools',
    version='0.1',
    author='Benjamin Tengelsen',
    author_email='btengels@cmu.edu',
    packages=['stochgametools'],
    description='Python library for finding subgame perfect equilibria of stochastic games',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires='>=3.7',
    install_requires=['numpy'],
    extras_require={
        'mpi': ['mpi4py'],
        'test': ['pytest', 'cvxopt'],
    },
)
