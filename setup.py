from setuptools import find_packages, setup


extras_require = {}

extras_require["data-surreal"] = [
    'surrealdb>=1.0.4,<1.1'
]

extras_require["data"] = [
    *extras_require["data-surreal"],
]

extras_require["test"] = [
    'pytest>=7.4',
    *extras_require["data-surreal"],
]

extras_require["all"] = [
    *extras_require["data"],
]


setup(
    name='nomina',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='MIT',
    description='Referential-integrity and hierarchy-validation core for payroll resources',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    install_requires=[
        'python-dateutil>=2.8.2,<3.0',
        'python-dotenv>=1.0.0,<2.0'
    ],
    extras_require=extras_require,
    python_requires=">=3.10"
)
