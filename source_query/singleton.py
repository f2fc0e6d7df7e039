# source_query/singleton.py


class Singleton:
    """Один экземпляр на процесс: повторный вызов конструктора возвращает тот же объект."""

    _instances = {}

    def __new__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super().__new__(cls)
        return cls._instances[cls]
