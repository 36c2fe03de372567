import ast
import os

from setuptools import find_packages, setup


def read_version():
    init_py = os.path.join(
        os.path.dirname(os.path.abspath(__file__)),
        'src', 'depsolver', '__init__.py',
    )
    with open(init_py) as f:
        for line in f:
            if line.startswith('__version__'):
                return ast.literal_eval(line.split('=', 1)[-1].strip())
    raise RuntimeError('__version__ not found in {}'.format(init_py))


# Static metadata lives in setup.cfg.
setup(
    package_dir={'': 'src'},
    packages=find_packages('src'),
    package_data={
        '': ['README*'],
    },
    version=read_version(),
)
