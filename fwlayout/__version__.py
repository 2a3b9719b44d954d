# file generated by setuptools_scm
# don't change, don't track in version control
__version__ = version = "1.0.0"
