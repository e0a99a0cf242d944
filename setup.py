#!/usr/bin/env python3
"""
WhyAlive Setup Configuration
"""

from setuptools import setup, find_packages
import os
import re

# Read README for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "WhyAlive - Retention graphs for debugging Python memory leaks"

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

# Single source of truth for the version is whyalive/__init__.py
def get_version():
    version_path = os.path.join(os.path.dirname(__file__), 'whyalive', '__init__.py')
    with open(version_path, 'r', encoding='utf-8') as f:
        match = re.search(r"^__version__\s*=\s*['\"]([^'\"]+)['\"]", f.read(), re.M)
    if not match:
        raise RuntimeError(f"Unable to find __version__ in {version_path}")
    return match.group(1)

setup(
    name='whyalive',
    version=get_version(),
    author='Kyle Clouthier',
    description='Retention graphs for debugging Python memory leaks',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    url='https://github.com/MemGuard/whyalive',
    project_urls={
        'Bug Reports': 'https://github.com/MemGuard/whyalive/issues',
        'Source': 'https://github.com/MemGuard/whyalive',
    },
    packages=find_packages(exclude=['tests*', 'docs*', 'examples*']),
    classifiers=[
        # Development Status
        'Development Status :: 4 - Beta',

        # Intended Audience
        'Intended Audience :: Developers',

        # Topic
        'Topic :: Software Development :: Debuggers',
        'Topic :: Software Development :: Quality Assurance',

        # License
        'License :: OSI Approved :: MIT License',

        # Python Versions
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',

        # Operating Systems
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=read_requirements(),
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=22.0.0',
            'flake8>=5.0.0',
            'mypy>=1.0.0',
        ],
    },
    zip_safe=False,
    keywords=[
        'memory leak detection',
        'reference graph',
        'garbage collection',
        'graphviz',
        'debugging tools',
    ],
)
