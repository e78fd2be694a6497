import os

# BEFORE importing distutils, remove MANIFEST. distutils doesn't properly
# update it when the contents of directories change.
if os.path.exists('MANIFEST'): os.remove('MANIFEST')

from setuptools import setup

# get metadata without importing the package

info = {}
dirname = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(dirname, 'admmnet', 'info.py'), 'rt', encoding='utf-8') as f:
    exec(f.read(), info)

long_description = info['LONG_DESCRIPTION']
if os.path.exists(os.path.join(dirname, 'README.md')):
    long_description = open(os.path.join(dirname, 'README.md'), 'rt', encoding='utf-8').read()
long_description_content_type = 'text/markdown'

def main(**extra_args):
    setup(name=info['NAME'],
          version=info['VERSION'],
          description=info['DESCRIPTION'],
          license=info['LICENSE'],
          classifiers=info['CLASSIFIERS'],
          packages = ['admmnet'],
          install_requires=info['REQUIRES'],
          extras_require={'test': ['pytest']},
          python_requires='>=3.9',
          data_files=[],
          scripts=[],
          long_description=long_description,
          long_description_content_type=long_description_content_type,
          **extra_args
         )

#simple way to test what setup will do
#python setup.py install --prefix=/tmp
if __name__ == "__main__":
    main()
