import os.path

from setuptools import setup, find_packages


setup_dir = os.path.split(os.path.abspath(__file__))[0]
with open(os.path.join(setup_dir, 'README.rst')) as f:
    DOCUMENTATION = f.read()

init_path = os.path.join(setup_dir, 'tensorscan', '__init__.py')
globals_dict = {}
with open(init_path) as f:
    exec(f.read(), globals_dict)
VERSION = '.'.join([str(x) for x in globals_dict['VERSION']])

dependencies = ['mako', 'numpy']

setup(
    name='tensorscan',
    packages=find_packages(include=['tensorscan', 'tensorscan.*']),
    provides=['tensorscan'],
    install_requires=dependencies,
    extras_require={'test': ['pytest']},
    python_requires='>=3.8',
    package_data={'tensorscan.algorithms': ['*.mako']},
    version=VERSION,
    description='Multidimensional parallel prefix scans built from generated kernels',
    long_description=DOCUMENTATION,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Mathematics'
    ]
)
