from setuptools import setup, find_packages

setup(
    name='pikolo-engine',
    version='0.1.0',
    packages=find_packages(include=['pikolo', 'pikolo.*']),
    install_requires=[
        'numpy',
        'pandas',
        'python-dotenv',
        'supabase',
        'typing_extensions',
    ],
    extras_require={
        'tests': ['pytest'],
    },
    description='Deterministic Python core for BTC prediction markets: AMM quotes, borrowing-power previews, market resolution and slippage reporting.',
    author='Pikolo',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.11',
)
