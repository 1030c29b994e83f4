class ExportError(Exception):
    def __init__(self, msg):
        self.msg = msg
        super().__init__(self.msg)


class NotFoundError(ExportError):
    pass


class IntegrityError(ExportError):
    def __init__(self, package_name):
        self.package_name = package_name
        super().__init__(f"Package {package_name} does not contain an md5 hash")


class ConfigurationError(ExportError):
    pass


class EncodingError(ExportError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Could not convert {path!r} to str")


class IoError(ExportError):
    def __init__(self, path, err, what="file"):
        self.path = path
        self.err = err
        super().__init__(
            f"Could not write {what}!"
            f"\npath: `{path}`"
            f"\nError message: {err}"
        )


class LockFileError(ExportError):
    pass
