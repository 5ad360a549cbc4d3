"""Setup script for jlbridge."""
import re
from setuptools import setup, find_packages  # type: ignore


def read_version() -> str:
    # jlbridge imports its dependencies, so the version is read rather than
    # imported.
    with open('jlbridge/__init__.py') as init_file:
        return re.search(
            r"^version = '([^']+)'", init_file.read(), re.MULTILINE
        ).group(1)


test_requirements = [
    'coverage>=6.4.4',
    'hypothesis>=6',
    'pytest>=7',
    'scripttest',
]

setup(
    name='jlbridge',
    version=read_version(),
    description='Call embedded Julia functions from Python through mexjulia',  # noqa
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Software Development :: Interpreters',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='julia mex embedding',
    python_requires='>=3.9',
    packages=find_packages(include=['jlbridge', 'jlbridge.*']),  # type: ignore
    install_requires=[
        'numpy>=1.21',
        'parsy>=1.3.0,<3',
        'typing-extensions>=4',
    ],
    tests_require=test_requirements,
    extras_require={
        'test': test_requirements,
        'dev': ['axblack==20220330', 'mypy>=1.1.1', 'pre-commit>=2.6.0,<3'],
    },
    entry_points={'console_scripts': ['jlbridge=jlbridge.__main__:main']},
)
