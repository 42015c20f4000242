
from setuptools import find_namespace_packages, setup

setup(
    name='b64sidecar',
    author='Meir Michanie',
    author_email='meirm@riunx.com',
    description='A one-shot JSON over stdio base64 sidecar process',
    license='MIT',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['b64sidecar', 'b64sidecar.*']),
    version='1.0.0',
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    install_requires=[
        'typer',
        'rich',
        'pydantic>=2',
        'PyYAML',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'b64sidecar = b64sidecar.cli:main',
        ],
    },
)
