from setuptools import setup, find_packages


def readme():
    with open("README.md") as f:
        return f.read()


def requirements():
    req = []
    with open("requirements.txt") as fd:
        for line in fd:
            line = line.strip()
            if line and not line.startswith("#"):
                req.append(line)
    return req


def get_version():
    with open("libvmnet/VERSION") as f:
        version = f.read().strip()
    return version


setup(
    name="vmnetstate",
    version=get_version(),
    description="Static route and resolver validation for VM provisioning",
    long_description=readme(),
    long_description_content_type="text/markdown",
    license="LGPL2.1+",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements(),
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": {
            "vmnetctl = vmnetctl.vmnetctl:main",
        }
    },
    package_data={
        "libvmnet": ["VERSION", "schemas/*.yaml"],
    },
)
