from setuptools import setup, find_packages

setup(
    name='archiedoc',
    version='0.1.0',
    packages=find_packages(),
    entry_points={
        'console_scripts': [
            'archiedoc=archiedoc.cli:main',
        ],
    },
    install_requires=[
        'python-dotenv',
        'pydantic',
        'pyyaml',
        'click',
        'bs4',
        'archieml',
        'google-api-python-client',
        'httplib2',
        'oauth2client'
    ],
    extras_require={
        'test': ['pytest'],
    },
    author='While True Industries',
    author_email='adam@whiletrue.industries',
    description='Google Doc to ArchieML JSON for data-journalism page templates',
    python_requires='>=3.10',
)
