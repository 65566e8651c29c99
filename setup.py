"""
Package installation and setup script for the feed digest reader.
"""

from setuptools import setup, find_packages
import os

# Read the README file
readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = 'fdr - show unseen items from the RSS feeds in an OPML file'

# Read requirements
requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
if os.path.exists(requirements_path):
    with open(requirements_path, 'r', encoding='utf-8') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
else:
    requirements = [
        'requests>=2.31.0',
        'feedparser>=6.0.10',
        'python-dateutil>=2.8.2',
        'user_agent>=0.1.10',
        'python-dotenv>=1.0.0',
        'click>=8.1.0',
    ]

setup(
    name='fdr',
    version='1.0.0',
    description='Feed digest reader: aggregate RSS feeds and show only unseen items',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='fdr contributors',

    # Package discovery
    packages=find_packages(exclude=['tests*']),
    include_package_data=True,

    # Dependencies
    install_requires=requirements,

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=23.0.0',
            'flake8>=5.0.0',
            'mypy>=1.0.0',
        ],
        'test': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'responses>=0.23.0',
        ]
    },

    # Entry points
    entry_points={
        'console_scripts': [
            'fdr=fdr.main:main',
        ],
    },

    # Metadata
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary',
        'Topic :: Text Processing :: Markup :: XML',
    ],

    # Python version requirement
    python_requires='>=3.10',

    # Keywords
    keywords='rss opml feeds reader aggregator',

    # License
    license='MIT',

    # Zip safe
    zip_safe=False,
)
