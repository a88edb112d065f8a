import setuptools

setuptools.setup(
    name="kvpbase",
    version="4.0.0",
    description="Client library and command line for the Kvpbase object storage",
    classifiers=[
        (
            "License :: OSI Approved :: "
            "GNU Lesser General Public License v3 or later (LGPLv3+)"
        ),
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.10",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    package_data={"kvpbase.common": ["schemas/*.json"]},
    install_requires=[
        "cliff",
        "importlib_resources",
        "jsonschema",
        "PyYAML",
        "urllib3",
    ],
    extras_require={
        "test": [
            "mock",
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "kvpbase = kvpbase.cli.common.shell:main",
        ],
        "kvpbase.service": [
            "ping = kvpbase.cli.service.service:PingService",
            "token = kvpbase.cli.service.service:ShowToken",
        ],
        "kvpbase.container": [
            "container_list = kvpbase.cli.container.container:ListContainer",
            "container_create = kvpbase.cli.container.container:CreateContainer",
            "container_show = kvpbase.cli.container.container:ShowContainer",
            "container_set = kvpbase.cli.container.container:SetContainer",
            "container_keys = kvpbase.cli.container.container:ShowContainerKeys",
            "container_enumerate = "
            "kvpbase.cli.container.container:EnumerateContainer",
            "container_audit_log = "
            "kvpbase.cli.container.container:ShowContainerAuditLog",
            "container_delete = kvpbase.cli.container.container:DeleteContainer",
            "container_exists = kvpbase.cli.container.container:ContainerExists",
        ],
        "kvpbase.object": [
            "object_write = kvpbase.cli.object.object:WriteObject",
            "object_write_range = kvpbase.cli.object.object:WriteObjectRange",
            "object_set_tags = kvpbase.cli.object.object:SetObjectTags",
            "object_set_keys = kvpbase.cli.object.object:SetObjectKeys",
            "object_keys = kvpbase.cli.object.object:ShowObjectKeys",
            "object_upload = kvpbase.cli.object.object:UploadObject",
            "object_read = kvpbase.cli.object.object:ReadObject",
            "object_read_range = kvpbase.cli.object.object:ReadObjectRange",
            "object_download = kvpbase.cli.object.object:DownloadObject",
            "object_rename = kvpbase.cli.object.object:RenameObject",
            "object_delete = kvpbase.cli.object.object:DeleteObject",
            "object_exists = kvpbase.cli.object.object:ObjectExists",
            "object_show = kvpbase.cli.object.object:ShowObject",
        ],
        "kvpbase.stream": [
            "stream_upload = kvpbase.cli.stream.stream:StreamUpload",
            "stream_download = kvpbase.cli.stream.stream:StreamDownload",
            "stream_put = kvpbase.cli.stream.stream:StreamPut",
            "stream_get = kvpbase.cli.stream.stream:StreamGet",
        ],
    },
)
