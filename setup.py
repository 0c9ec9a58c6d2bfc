# setup.py
from setuptools import setup, find_packages

setup(
    name="ember",
    version="0.3.0",
    description="An embeddable Lisp runtime with a cooperative debugger",
    packages=find_packages(include=["ember", "ember.*"]),
    python_requires=">=3.10",
    install_requires=["numpy"],
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={"console_scripts": ["ember=ember.repl:main"]},
    zip_safe=False,
)
