"""
Geometry Sinks
==============

The parser does not store anything. Every record it recognizes is handed,
in document order, to a *sink*: an object with one method per record kind.

| Method                                | OBJ statement      |
|---------------------------------------|--------------------|
| on_vertex(x, y, z, w)                 | v x y z [w]        |
| on_texture(u, v, w)                   | vt u v [w]         |
| on_normal(x, y, z)                    | vn x y z           |
| on_parameter(a, b, c)                 | vp a [b [c]]       |
| on_face(indices, count)               | f p[/t][/n] ...    |

GeometrySink implements every method as a no-op so subclasses only override
the events they care about. ObjMesh keeps everything in memory; TeeSink fans
events out to several sinks at once.

Face indices are 1-based as written in the file, with 0 meaning "absent".
No sink here checks that an index refers to an existing record.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IndexTriplet:
    """
    One vertex reference of a face.

    Attributes:
        position: Index of the vertex position (1-based)
        texture: Index of the texture coordinate, 0 if absent
        normal: Index of the normal, 0 if absent
    """
    position: int
    texture: int = 0
    normal: int = 0

    @property
    def has_texture(self) -> bool:
        return self.texture != 0

    @property
    def has_normal(self) -> bool:
        return self.normal != 0

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.position, self.texture, self.normal)


class GeometrySink:
    """
    Receiver of parsed geometry events.

    All methods are no-ops; override the ones you need.
    """

    def on_vertex(self, x: float, y: float, z: float, w: float) -> None:
        pass

    def on_texture(self, u: float, v: float, w: float) -> None:
        pass

    def on_normal(self, x: float, y: float, z: float) -> None:
        pass

    def on_parameter(self, a: float, b: float, c: float) -> None:
        pass

    def on_face(self, indices: list[IndexTriplet], count: int) -> None:
        pass


@dataclass
class ObjMesh(GeometrySink):
    """
    Sink that stores every event it receives.

    Attributes:
        vertices: (x, y, z, w) per vertex statement
        texture_coords: (u, v, w) per texture statement
        normals: (x, y, z) per normal statement
        parameters: (a, b, c) per parameter statement
        faces: One list of IndexTriplet per face statement
    """
    vertices: list[tuple[float, float, float, float]] = field(default_factory=list)
    texture_coords: list[tuple[float, float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)
    parameters: list[tuple[float, float, float]] = field(default_factory=list)
    faces: list[list[IndexTriplet]] = field(default_factory=list)

    def on_vertex(self, x: float, y: float, z: float, w: float) -> None:
        self.vertices.append((x, y, z, w))

    def on_texture(self, u: float, v: float, w: float) -> None:
        self.texture_coords.append((u, v, w))

    def on_normal(self, x: float, y: float, z: float) -> None:
        self.normals.append((x, y, z))

    def on_parameter(self, a: float, b: float, c: float) -> None:
        self.parameters.append((a, b, c))

    def on_face(self, indices: list[IndexTriplet], count: int) -> None:
        # The parser reuses nothing, but callers may; keep our own copy
        self.faces.append(list(indices[:count]))

    @property
    def is_empty(self) -> bool:
        return not (
            self.vertices or self.texture_coords or self.normals
            or self.parameters or self.faces
        )

    def summary(self) -> str:
        """One-line description of what the mesh holds."""
        return (
            f"{len(self.vertices)} vertices, "
            f"{len(self.texture_coords)} texture coordinates, "
            f"{len(self.normals)} normals, "
            f"{len(self.parameters)} parameters, "
            f"{len(self.faces)} faces"
        )


class TeeSink(GeometrySink):
    """Forwards every event to each wrapped sink, in the order given."""

    def __init__(self, *sinks: GeometrySink):
        self.sinks = list(sinks)

    def on_vertex(self, x: float, y: float, z: float, w: float) -> None:
        for sink in self.sinks:
            sink.on_vertex(x, y, z, w)

    def on_texture(self, u: float, v: float, w: float) -> None:
        for sink in self.sinks:
            sink.on_texture(u, v, w)

    def on_normal(self, x: float, y: float, z: float) -> None:
        for sink in self.sinks:
            sink.on_normal(x, y, z)

    def on_parameter(self, a: float, b: float, c: float) -> None:
        for sink in self.sinks:
            sink.on_parameter(a, b, c)

    def on_face(self, indices: list[IndexTriplet], count: int) -> None:
        for sink in self.sinks:
            sink.on_face(indices, count)
