"""pprof message classes (perftools.profiles, profile.proto).

The schema is declared here as a FileDescriptorProto and loaded into a
private descriptor pool, so no protoc step is needed and no other copy of
profile.proto registered in the default pool can clash with it.
"""
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "perftools.profiles"

_F = descriptor_pb2.FieldDescriptorProto

INT64 = _F.TYPE_INT64
UINT64 = _F.TYPE_UINT64
BOOL = _F.TYPE_BOOL
STRING = _F.TYPE_STRING
MESSAGE = _F.TYPE_MESSAGE

# message name -> [(field name, number, type, repeated, message type name)]
SCHEMA = {
    "Profile": [
        ("sample_type", 1, MESSAGE, True, "ValueType"),
        ("sample", 2, MESSAGE, True, "Sample"),
        ("mapping", 3, MESSAGE, True, "Mapping"),
        ("location", 4, MESSAGE, True, "Location"),
        ("function", 5, MESSAGE, True, "Function"),
        ("string_table", 6, STRING, True, None),
        ("drop_frames", 7, INT64, False, None),
        ("keep_frames", 8, INT64, False, None),
        ("time_nanos", 9, INT64, False, None),
        ("duration_nanos", 10, INT64, False, None),
        ("period_type", 11, MESSAGE, False, "ValueType"),
        ("period", 12, INT64, False, None),
        ("comment", 13, INT64, True, None),
        ("default_sample_type", 14, INT64, False, None),
    ],
    "ValueType": [
        ("type", 1, INT64, False, None),
        ("unit", 2, INT64, False, None),
    ],
    "Sample": [
        ("location_id", 1, UINT64, True, None),
        ("value", 2, INT64, True, None),
        ("label", 3, MESSAGE, True, "Label"),
    ],
    "Label": [
        ("key", 1, INT64, False, None),
        ("str", 2, INT64, False, None),
        ("num", 3, INT64, False, None),
        ("num_unit", 4, INT64, False, None),
    ],
    "Mapping": [
        ("id", 1, UINT64, False, None),
        ("memory_start", 2, UINT64, False, None),
        ("memory_limit", 3, UINT64, False, None),
        ("file_offset", 4, UINT64, False, None),
        ("filename", 5, INT64, False, None),
        ("build_id", 6, INT64, False, None),
        ("has_functions", 7, BOOL, False, None),
        ("has_filenames", 8, BOOL, False, None),
        ("has_line_numbers", 9, BOOL, False, None),
        ("has_inline_frames", 10, BOOL, False, None),
    ],
    "Location": [
        ("id", 1, UINT64, False, None),
        ("mapping_id", 2, UINT64, False, None),
        ("address", 3, UINT64, False, None),
        ("line", 4, MESSAGE, True, "Line"),
        ("is_folded", 5, BOOL, False, None),
    ],
    "Line": [
        ("function_id", 1, UINT64, False, None),
        ("line", 2, INT64, False, None),
        ("column", 3, INT64, False, None),
    ],
    "Function": [
        ("id", 1, UINT64, False, None),
        ("name", 2, INT64, False, None),
        ("system_name", 3, INT64, False, None),
        ("filename", 4, INT64, False, None),
        ("start_line", 5, INT64, False, None),
    ],
}


def _file_descriptor_proto() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="perftools/profiles/profile.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in SCHEMA.items():
        message = file_proto.message_type.add(name=message_name)
        for field_name, number, field_type, repeated, type_name in fields:
            field = message.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
            )
            if type_name:
                field.type_name = f".{PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor_proto().SerializeToString())


def _message_class(name):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Profile = _message_class("Profile")
ValueType = _message_class("ValueType")
Sample = _message_class("Sample")
Location = _message_class("Location")
Line = _message_class("Line")
Function = _message_class("Function")
