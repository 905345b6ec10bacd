"""singleton base class shared by the logger and the connection manager"""


class SingletonInstance:
    """base class for process-wide singletons

    each subclass keeps its own instance, so resetting the manager in a test
    does not drop the logger.
    """

    _instances = {}

    @classmethod
    def instance(cls, *args, **kwargs):
        """create or get the singleton instance of this class"""
        if cls not in SingletonInstance._instances:
            SingletonInstance._instances[cls] = cls(*args, **kwargs)
        return SingletonInstance._instances[cls]

    @classmethod
    def has_instance(cls) -> bool:
        """check whether the singleton has been created"""
        return cls in SingletonInstance._instances

    @classmethod
    def reset_instance(cls):
        """drop the singleton instance (for testing)"""
        SingletonInstance._instances.pop(cls, None)
