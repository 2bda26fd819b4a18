program_name = 'pyscsupport'
version = '0.1.0'

from setuptools import setup, find_packages

com_req_pakcages = ['numpy', 'scipy', 'h5py', 'ruamel.yaml']
install_requires = com_req_pakcages

extras_require = {'test': ['pytest']}

packages = find_packages('src')

package_dir = {'': 'src'}

setup(
    name=program_name,
    version=version,
    packages=packages,
    package_dir=package_dir,
    zip_safe=False,
    description='Support structure (girder/plinth/section) registration and '
    'alignment-error handling for simulated commissioning',
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires='>=3.8',
)
