from enum import Enum, auto

class DataType(Enum):
    # Scalars
    FLOAT = auto()
    BOOL = auto()

    # Vectors
    VEC2 = auto()
    VEC3 = auto()
    VEC4 = auto()

    # Colors behave as vec3 in arithmetic but print as color('#rrggbb')
    COLOR = auto()

    # Opaque sampler reference (texture maps)
    TEXTURE = auto()

    def is_vector(self):
        return self in {DataType.VEC2, DataType.VEC3, DataType.VEC4, DataType.COLOR}

    def is_scalar(self):
        return self in {DataType.FLOAT, DataType.BOOL}

    def component_count(self):
        if self == DataType.VEC2: return 2
        if self in {DataType.VEC3, DataType.COLOR}: return 3
        if self == DataType.VEC4: return 4
        return 1

    @staticmethod
    def vector_of(size: int) -> 'DataType':
        """Returns the float vector type with `size` components (1 -> FLOAT)."""
        if size <= 1: return DataType.FLOAT
        if size == 2: return DataType.VEC2
        if size == 3: return DataType.VEC3
        return DataType.VEC4

    def __str__(self):
        return self.name.lower()
