class LazyClassAttr(object):
    """ When accessed via class or instance, replaces itself on the class (and instance, if any)
        with the result of calling the `func` passed into `LazyClassAttr.__init__`.

        `xresource.base.model.BaseModel.__init_subclass__` puts one of these on
        `xresource.base.model.BaseModel.api`, so each model class is only configured the first
        time its api is needed.
    """
    def __init__(self, func, name=None):
        self._setup_func = func
        self.name = name if name is not None else func.__name__
        self.__doc__ = func.__doc__

    def __get__(self, instance, class_):
        result = self._setup_func(instance or class_)
        if instance is not None:
            setattr(instance, self.name, result)

        if class_ is not None:
            setattr(class_, self.name, result)

        return result
