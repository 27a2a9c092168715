"""
Protocol buffer classes for mailbox.proto.

The file descriptor is assembled with descriptor_pb2 and registered in the
default pool, then the message classes are built the same way protoc output
builds them.
"""

from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import empty_pb2 as google_dot_protobuf_dot_empty__pb2  # noqa: F401
from google.protobuf.internal import builder as _builder

_Field = _descriptor_pb2.FieldDescriptorProto


def _file_descriptor_proto():
    proto = _descriptor_pb2.FileDescriptorProto(
        name='wcdist/mailbox.proto',
        package='wcdist',
        syntax='proto3',
        dependency=['google/protobuf/empty.proto'],
    )

    envelope = proto.message_type.add(name='Envelope')
    envelope.oneof_decl.add(name='payload')
    envelope.field.add(name='source', number=1, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    envelope.field.add(name='tag', number=2, type=_Field.TYPE_INT32, label=_Field.LABEL_OPTIONAL)
    envelope.field.add(name='text', number=3, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL,
                       oneof_index=0)
    envelope.field.add(name='number', number=4, type=_Field.TYPE_INT64, label=_Field.LABEL_OPTIONAL,
                       oneof_index=0)

    service = proto.service.add(name='Mailbox')
    service.method.add(name='Deliver', input_type='.wcdist.Envelope',
                       output_type='.google.protobuf.Empty')
    return proto


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file_descriptor_proto().SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, 'wcdist.common.mailbox_pb2', _globals)
