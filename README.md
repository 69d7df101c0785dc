# envspec

Declare the environment variables your application reads, once, with their
types, defaults and constraints. Each variable is checked against its
specification when it is read, and its value comes back as a Python value, or
an exception says exactly what is wrong.

## Installation

```
pip install envspec
```

## Declaring variables

Every variable starts from a builder function that takes the variable's name
and a human-readable description. Builders are configured with chained
`with_*` calls and finished with `required()`, `optional()` or
`deprecated()`. Each of these takes an optional `Registry` and registers the
variable there; without one, the process-wide registry returned by
`envspec.spec.default_registry()` is used.

```python
from envspec.spec import Registry
from envspec.boolean import boolean
from envspec.duration import duration, SECOND
from envspec.numeric import signed
from envspec.enum import enum
from envspec.url import url
from envspec.kubernetes import kubernetes_service

registry = Registry()

debug = boolean("APP_DEBUG", "enable debug output").with_default(False).required(registry)
timeout = duration("APP_TIMEOUT", "request timeout").with_maximum(60 * SECOND).optional(registry)
workers = signed("APP_WORKERS", "number of workers", 16).with_minimum(1).required(registry)
colour = enum("APP_COLOUR", "theme colour").with_members("red", "green", "blue").required(registry)
endpoint = url("APP_ENDPOINT", "upstream API").required(registry)
database = kubernetes_service("database").optional(registry)

print(debug.value())
print(workers.value())

if (t := timeout.value()) is not None:
    print("timeout is", t, "nanoseconds")
```

Values are read from `os.environ` each time they are asked for. An empty
variable counts as undefined.

- `Required.value()` returns the value or the default; it raises
  `UndefinedError` when the variable is undefined and has no default, and
  `ValueInvalidError` when the value fails validation.
- `Optional.value()` returns `None` when the variable is undefined and has no
  default, and raises `ValueInvalidError` for an invalid value.
- `Deprecated.deprecated_value()` behaves like `Optional.value()`.

A mistake in the specification itself, such as an empty name or description,
a default that breaks a constraint, or an enum with duplicate or too few
members, raises `SpecError` when the builder is finished.

`Registry.variables()` returns the registered variables sorted by name, and
`Registry.reset()` empties the registry.

## Available builders

| Builder | Module | Value type |
| --- | --- | --- |
| `binary(name, desc)` | `envspec.binary` | `bytes`, base64 (default) or hex encoded |
| `boolean(name, desc)` | `envspec.boolean` | `bool`, literals `true`/`false` unless changed with `with_literals` |
| `duration(name, desc)` | `envspec.duration` | `int` nanoseconds, written like `300ms`, `-1.5h`, `2h45m`; minimum 1ns by default |
| `enum(name, desc)` | `envspec.enum` | one of the members added with `with_member` / `with_members` |
| `file(name, desc)` | `envspec.file` | `FileName`, a `str` with `reader()`, `read_bytes()` and `read_string()` |
| `floating(name, desc, bits=64)` | `envspec.numeric` | finite `float`, 32- or 64-bit |
| `signed(name, desc, bits=64)` | `envspec.numeric` | `int` in the signed range of 8, 16, 32 or 64 bits |
| `unsigned(name, desc, bits=64)` | `envspec.numeric` | `int` in the unsigned range of 8, 16, 32 or 64 bits |
| `network_port(name, desc)` | `envspec.network` | `str`: a port from 1 to 65535 or an IANA service name |
| `url(name, desc)` | `envspec.url` | `urllib.parse.SplitResult` with a scheme and a host |
| `kubernetes_service(service)` | `envspec.kubernetes` | `KubernetesAddress` from `<SVC>_SERVICE_HOST` and `<SVC>_SERVICE_PORT` |

Notes:

- Numeric and duration builders accept `with_minimum` and `with_maximum`.
  Durations may be given as integer nanoseconds (see the `NANOSECOND` …
  `HOUR` constants) or as `datetime.timedelta`. `parse_duration` and
  `format_duration` are available on their own.
- Binary builders accept `with_base64_encoding(altchars="+/", padded=True)`,
  `with_hex_encoding()`, `with_encoded_default(text)`,
  `with_constraint(desc, fn)` and `with_sensitive_content()`, which marks the
  variable as sensitive.
- Kubernetes services can read a named port with `with_named_port("api")`,
  which uses `<SVC>_SERVICE_PORT_API`. For optional and deprecated services,
  defining only one of host and port raises `ValueError`.
- `envspec.network.validate_port`, `validate_iana_service_name`,
  `envspec.kubernetes.validate_host` and `validate_kubernetes_name` raise
  `ValueError` for invalid input.

## What it does not do

envspec is a library for declaring and reading variables. It has no command
and prints nothing: it does not render a validation report of all variables,
generate documentation for them, or export them as a `.env` file, and it does
not exit the process when a variable is invalid. Sensitive variables are only
marked as such.

## Testing

```
pip install envspec[test]
pytest
```