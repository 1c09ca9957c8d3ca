"""YAML codec for ``document: modulemd`` (module stream) documents.

Key order on output follows the schema layout of the reference documents;
mappings keyed by user-chosen names (profiles, components, service levels,
dependency modules) and all sets are sorted. The V2 dependency list keeps
its insertion order.
"""

from __future__ import annotations

import yaml
from loguru import logger

from ..core.exceptions import EmitError, MdVersionError, ParseError, ValidationError
from ..core.types import DocumentType, ModuleStreamVersion
from ..model.components import ComponentModule, ComponentRpm
from ..model.dependencies import Dependencies
from ..model.profile import BuildOpts, Profile, RpmMapEntry, ServiceLevel
from ..model.stream import ModuleStream, ModuleStreamV1, ModuleStreamV2
from .documents import SubdocumentInfo
from .emitter import FOLDED, Emitter
from .nodes import (
    iter_mapping,
    line_of,
    read_bool,
    read_date,
    read_generic,
    read_int,
    read_string,
    read_string_set,
    read_uint64,
    unknown_key,
)

# =============================================================================
# Parsing
# =============================================================================


def parse_stream(subdoc: SubdocumentInfo, strict: bool = False) -> ModuleStream:
    """Build a module stream from a parsed ``modulemd`` sub-document.

    The stream is validated before it is returned.

    Args:
        subdoc: Sub-document whose doctype is MODULESTREAM.
        strict: Treat unknown keys as errors instead of skipping them.

    Raises:
        ParseError: If the document structure is malformed.
        ValidationError: If a schema or cross-field rule is violated.
    """
    if subdoc.error is not None:
        raise subdoc.error
    if subdoc.doctype is not DocumentType.MODULESTREAM or subdoc.data is None:
        raise ParseError(f"Document {subdoc.index} is not a module stream")

    if subdoc.mdversion == ModuleStreamVersion.ONE:
        stream: ModuleStream = ModuleStreamV1()
    elif subdoc.mdversion == ModuleStreamVersion.TWO:
        stream = ModuleStreamV2()
    else:
        raise MdVersionError(f"Unsupported module stream mdversion: {subdoc.mdversion}")

    _parse_data(stream, subdoc.data, strict)
    stream.validate()
    logger.debug(
        f"Parsed module stream {stream.get_NSVCA_as_string()} (mdversion {stream.mdversion})"
    )
    return stream


def _parse_data(stream: ModuleStream, node: yaml.Node, strict: bool) -> None:
    is_v2 = isinstance(stream, ModuleStreamV2)

    for key, value in iter_mapping(node, "module stream data"):
        if key == "name":
            stream.module_name = read_string(value, "name")
        elif key == "stream":
            stream.stream_name = read_string(value, "stream")
        elif key == "version":
            stream.version = read_uint64(value, "version")
        elif key == "context":
            stream.context = read_string(value, "context")
        elif key == "arch":
            stream.arch = read_string(value, "arch")
        elif key == "summary":
            stream.summary = read_string(value, "summary")
        elif key == "description":
            stream.description = read_string(value, "description")
        elif key == "servicelevels":
            stream.servicelevels = _parse_servicelevels(value, strict)
        elif key == "license":
            _parse_license(stream, value, strict)
        elif key == "xmd":
            stream.xmd = read_generic(value)
        elif key == "dependencies":
            if is_v2:
                stream.dependencies = _parse_dependencies_v2(value, strict)
            else:
                _parse_dependencies_v1(stream, value, strict)
        elif key == "references":
            _parse_references(stream, value, strict)
        elif key == "profiles":
            stream.profiles = _parse_profiles(value, strict)
        elif key == "api":
            stream.rpm_api = _parse_rpms_wrapper(value, "api", strict)
        elif key == "filter":
            stream.rpm_filters = _parse_rpms_wrapper(value, "filter", strict)
        elif key == "buildopts":
            stream.buildopts = _parse_buildopts(value, is_v2, strict)
        elif key == "components":
            _parse_components(stream, value, is_v2, strict)
        elif key == "artifacts":
            _parse_artifacts(stream, value, is_v2, strict)
        else:
            unknown_key(key, value, "module stream data", strict)


def _parse_servicelevels(node: yaml.Node, strict: bool) -> dict[str, ServiceLevel]:
    servicelevels: dict[str, ServiceLevel] = {}
    for name, value in iter_mapping(node, "servicelevels"):
        level = ServiceLevel(name=name)
        for key, field_node in iter_mapping(value, f"servicelevel '{name}'"):
            if key == "eol":
                level.eol = read_date(field_node, "eol")
            else:
                unknown_key(key, field_node, f"servicelevel '{name}'", strict)
        servicelevels[name] = level
    return servicelevels


def _parse_license(stream: ModuleStream, node: yaml.Node, strict: bool) -> None:
    for key, value in iter_mapping(node, "license"):
        if key == "module":
            stream.module_licenses = read_string_set(value, "license.module")
        elif key == "content":
            stream.content_licenses = read_string_set(value, "license.content")
        else:
            unknown_key(key, value, "license", strict)


def _parse_dependencies_v1(stream: ModuleStreamV1, node: yaml.Node, strict: bool) -> None:
    for key, value in iter_mapping(node, "dependencies"):
        if key in ("buildrequires", "requires"):
            target = stream.buildtime_requires if key == "buildrequires" else stream.runtime_requires
            for module_name, stream_node in iter_mapping(value, key):
                target[module_name] = read_string(stream_node, f"{key}.{module_name}")
        else:
            unknown_key(key, value, "dependencies", strict)


def _parse_dependencies_v2(node: yaml.Node, strict: bool) -> list[Dependencies]:
    if not isinstance(node, yaml.SequenceNode):
        raise ParseError("dependencies must be a sequence", line_of(node))

    result: list[Dependencies] = []
    for item in node.value:
        deps = Dependencies()
        for key, value in iter_mapping(item, "dependencies entry"):
            if key in ("buildrequires", "requires"):
                target = deps.buildrequires if key == "buildrequires" else deps.requires
                for module_name, streams_node in iter_mapping(value, key):
                    target[module_name] = read_string_set(streams_node, f"{key}.{module_name}")
            else:
                unknown_key(key, value, "dependencies entry", strict)
        result.append(deps)
    return result


def _parse_references(stream: ModuleStream, node: yaml.Node, strict: bool) -> None:
    for key, value in iter_mapping(node, "references"):
        if key == "community":
            stream.community = read_string(value, "community")
        elif key == "documentation":
            stream.documentation = read_string(value, "documentation")
        elif key == "tracker":
            stream.tracker = read_string(value, "tracker")
        else:
            unknown_key(key, value, "references", strict)


def _parse_profiles(node: yaml.Node, strict: bool) -> dict[str, Profile]:
    profiles: dict[str, Profile] = {}
    for name, value in iter_mapping(node, "profiles"):
        profile = Profile(name=name)
        for key, field_node in iter_mapping(value, f"profile '{name}'"):
            if key == "description":
                profile.description = read_string(field_node, "description")
            elif key == "rpms":
                profile.rpms = read_string_set(field_node, f"profile '{name}' rpms")
            else:
                unknown_key(key, field_node, f"profile '{name}'", strict)
        profiles[name] = profile
    return profiles


def _parse_rpms_wrapper(node: yaml.Node, what: str, strict: bool) -> set[str]:
    rpms: set[str] = set()
    for key, value in iter_mapping(node, what):
        if key == "rpms":
            rpms = read_string_set(value, f"{what}.rpms")
        else:
            unknown_key(key, value, what, strict)
    return rpms


def _parse_buildopts(node: yaml.Node, is_v2: bool, strict: bool) -> BuildOpts:
    buildopts = BuildOpts()
    for key, value in iter_mapping(node, "buildopts"):
        if key != "rpms":
            unknown_key(key, value, "buildopts", strict)
            continue
        for opt, opt_node in iter_mapping(value, "buildopts.rpms"):
            if opt == "macros":
                buildopts.rpm_macros = read_string(opt_node, "macros")
            elif opt == "whitelist" and is_v2:
                buildopts.rpm_whitelist = read_string_set(opt_node, "whitelist")
            else:
                unknown_key(opt, opt_node, "buildopts.rpms", strict)
    return buildopts


def _parse_components(stream: ModuleStream, node: yaml.Node, is_v2: bool, strict: bool) -> None:
    for kind, value in iter_mapping(node, "components"):
        if kind == "rpms":
            for name, comp_node in iter_mapping(value, "components.rpms"):
                stream.rpm_components[name] = _parse_component_rpm(name, comp_node, is_v2, strict)
        elif kind == "modules":
            for name, comp_node in iter_mapping(value, "components.modules"):
                stream.module_components[name] = _parse_component_module(
                    name, comp_node, is_v2, strict
                )
        else:
            unknown_key(kind, value, "components", strict)


def _parse_component_rpm(key: str, node: yaml.Node, is_v2: bool, strict: bool) -> ComponentRpm:
    what = f"rpm component '{key}'"
    component = ComponentRpm(key=key)
    for field_name, value in iter_mapping(node, what):
        if field_name == "rationale":
            component.rationale = read_string(value, "rationale")
        elif field_name == "name" and is_v2:
            component.name = read_string(value, "name")
        elif field_name == "repository":
            component.repository = read_string(value, "repository")
        elif field_name == "cache":
            component.cache = read_string(value, "cache")
        elif field_name == "ref":
            component.ref = read_string(value, "ref")
        elif field_name == "buildorder":
            component.buildorder = read_int(value, "buildorder")
        elif field_name == "buildafter" and is_v2:
            component.buildafter = read_string_set(value, "buildafter")
        elif field_name == "buildonly" and is_v2:
            component.buildonly = read_bool(value, "buildonly")
        elif field_name == "arches":
            component.arches = read_string_set(value, "arches")
        elif field_name == "multilib":
            component.multilib = read_string_set(value, "multilib")
        else:
            unknown_key(field_name, value, what, strict)
    return component


def _parse_component_module(
    key: str, node: yaml.Node, is_v2: bool, strict: bool
) -> ComponentModule:
    what = f"module component '{key}'"
    component = ComponentModule(key=key)
    for field_name, value in iter_mapping(node, what):
        if field_name == "rationale":
            component.rationale = read_string(value, "rationale")
        elif field_name == "repository":
            component.repository = read_string(value, "repository")
        elif field_name == "ref":
            component.ref = read_string(value, "ref")
        elif field_name == "buildorder":
            component.buildorder = read_int(value, "buildorder")
        elif field_name == "buildafter" and is_v2:
            component.buildafter = read_string_set(value, "buildafter")
        else:
            unknown_key(field_name, value, what, strict)
    return component


def _parse_artifacts(stream: ModuleStream, node: yaml.Node, is_v2: bool, strict: bool) -> None:
    for key, value in iter_mapping(node, "artifacts"):
        if key == "rpms":
            stream.rpm_artifacts = read_string_set(value, "artifacts.rpms")
        elif key == "rpm-map" and is_v2:
            stream.rpm_artifact_map = _parse_rpm_map(value, strict)
        else:
            unknown_key(key, value, "artifacts", strict)


def _parse_rpm_map(node: yaml.Node, strict: bool) -> dict[str, dict[str, RpmMapEntry]]:
    rpm_map: dict[str, dict[str, RpmMapEntry]] = {}
    for digest_type, digests_node in iter_mapping(node, "rpm-map"):
        entries: dict[str, RpmMapEntry] = {}
        for digest, entry_node in iter_mapping(digests_node, f"rpm-map.{digest_type}"):
            entries[digest] = _parse_rpm_map_entry(entry_node, digest, strict)
        rpm_map[digest_type] = entries
    return rpm_map


def _parse_rpm_map_entry(node: yaml.Node, digest: str, strict: bool) -> RpmMapEntry:
    what = f"rpm-map entry '{digest}'"
    fields: dict[str, str] = {}
    epoch: int | None = None
    nevra: str | None = None
    for key, value in iter_mapping(node, what):
        if key in ("name", "version", "release", "arch"):
            fields[key] = read_string(value, key)
        elif key == "epoch":
            epoch = read_uint64(value, "epoch")
        elif key == "nevra":
            nevra = read_string(value, "nevra")
        else:
            unknown_key(key, value, what, strict)

    missing = [k for k in ("name", "version", "release", "arch") if k not in fields]
    if epoch is None:
        missing.append("epoch")
    if missing:
        raise ValidationError(f"{what} is missing: {', '.join(missing)}")

    entry = RpmMapEntry(epoch=epoch, **fields)
    if nevra is not None and nevra != entry.nevra:
        raise ValidationError(f"{what} nevra '{nevra}' does not match '{entry.nevra}'")
    return entry


# =============================================================================
# Emission
# =============================================================================


def emit_stream(stream: ModuleStream, emitter: Emitter) -> None:
    """Append one ``modulemd`` document for ``stream`` to ``emitter``.

    Raises:
        EmitError: If the stream does not validate.
    """
    try:
        stream.validate()
    except ValidationError as e:
        raise EmitError(f"Refusing to emit invalid module stream: {e}") from e

    is_v2 = isinstance(stream, ModuleStreamV2)

    emitter.start_document()
    emitter.start_mapping()
    emitter.key_value("document", DocumentType.MODULESTREAM.value)
    emitter.key_value("version", int(stream.mdversion))
    emitter.scalar("data")
    emitter.start_mapping()

    emitter.key_value("name", stream.module_name)
    emitter.key_value("stream", stream.stream_name)
    if stream.version:
        emitter.key_value("version", stream.version)
    emitter.key_value("context", stream.context)
    emitter.key_value("arch", stream.arch)
    emitter.key_value("summary", stream.summary)
    emitter.key_value("description", stream.description, FOLDED)

    if stream.servicelevels:
        _emit_servicelevels(stream, emitter)

    if stream.module_licenses or stream.content_licenses:
        emitter.scalar("license")
        emitter.start_mapping()
        if stream.module_licenses:
            emitter.key_string_set("module", stream.module_licenses)
        if stream.content_licenses:
            emitter.key_string_set("content", stream.content_licenses)
        emitter.end_mapping()

    if stream.xmd is not None:
        emitter.scalar("xmd")
        emitter.generic(stream.xmd)

    if is_v2:
        if stream.dependencies:
            _emit_dependencies_v2(stream, emitter)
    elif stream.buildtime_requires or stream.runtime_requires:
        _emit_dependencies_v1(stream, emitter)

    if any(ref is not None for ref in (stream.community, stream.documentation, stream.tracker)):
        emitter.scalar("references")
        emitter.start_mapping()
        emitter.key_value("community", stream.community)
        emitter.key_value("documentation", stream.documentation)
        emitter.key_value("tracker", stream.tracker)
        emitter.end_mapping()

    if stream.profiles:
        _emit_profiles(stream, emitter)

    if stream.rpm_api:
        _emit_rpms_wrapper(emitter, "api", stream.rpm_api)
    if stream.rpm_filters:
        _emit_rpms_wrapper(emitter, "filter", stream.rpm_filters)

    if stream.buildopts is not None and not stream.buildopts.is_empty():
        emitter.scalar("buildopts")
        emitter.start_mapping()
        emitter.scalar("rpms")
        emitter.start_mapping()
        emitter.key_value("macros", stream.buildopts.rpm_macros, FOLDED)
        if stream.buildopts.rpm_whitelist:
            emitter.key_string_set("whitelist", stream.buildopts.rpm_whitelist)
        emitter.end_mapping()
        emitter.end_mapping()

    if stream.rpm_components or stream.module_components:
        _emit_components(stream, emitter)

    rpm_map = stream.rpm_artifact_map if is_v2 else {}
    if stream.rpm_artifacts or rpm_map:
        emitter.scalar("artifacts")
        emitter.start_mapping()
        if stream.rpm_artifacts:
            emitter.key_string_set("rpms", stream.rpm_artifacts)
        if rpm_map:
            _emit_rpm_map(rpm_map, emitter)
        emitter.end_mapping()

    emitter.end_mapping()
    emitter.end_mapping()
    emitter.end_document()


def dump_stream(stream: ModuleStream) -> str:
    """Render a single module stream as a complete YAML stream."""
    emitter = Emitter()
    emitter.start_stream()
    emit_stream(stream, emitter)
    emitter.end_stream()
    return emitter.to_string()


def _emit_servicelevels(stream: ModuleStream, emitter: Emitter) -> None:
    emitter.scalar("servicelevels")
    emitter.start_mapping()
    for name in sorted(stream.servicelevels):
        level = stream.servicelevels[name]
        emitter.scalar(name)
        emitter.start_mapping()
        if level.eol is not None:
            emitter.key_value("eol", level.eol.isoformat())
        emitter.end_mapping()
    emitter.end_mapping()


def _emit_dependencies_v1(stream: ModuleStreamV1, emitter: Emitter) -> None:
    emitter.scalar("dependencies")
    emitter.start_mapping()
    for key, requirements in (
        ("buildrequires", stream.buildtime_requires),
        ("requires", stream.runtime_requires),
    ):
        if not requirements:
            continue
        emitter.scalar(key)
        emitter.start_mapping()
        for module_name in sorted(requirements):
            emitter.key_value(module_name, requirements[module_name])
        emitter.end_mapping()
    emitter.end_mapping()


def _emit_dependencies_v2(stream: ModuleStreamV2, emitter: Emitter) -> None:
    emitter.scalar("dependencies")
    emitter.start_sequence()
    for deps in stream.dependencies:
        emitter.start_mapping()
        for key, requirements in (
            ("buildrequires", deps.buildrequires),
            ("requires", deps.requires),
        ):
            if not requirements:
                continue
            emitter.scalar(key)
            emitter.start_mapping()
            for module_name in sorted(requirements):
                emitter.key_string_set(module_name, requirements[module_name], flow=True)
            emitter.end_mapping()
        emitter.end_mapping()
    emitter.end_sequence()


def _emit_profiles(stream: ModuleStream, emitter: Emitter) -> None:
    emitter.scalar("profiles")
    emitter.start_mapping()
    for name in sorted(stream.profiles):
        profile = stream.profiles[name]
        emitter.scalar(name)
        emitter.start_mapping()
        emitter.key_value("description", profile.description)
        if profile.rpms:
            emitter.key_string_set("rpms", profile.rpms)
        emitter.end_mapping()
    emitter.end_mapping()


def _emit_rpms_wrapper(emitter: Emitter, key: str, rpms: set[str]) -> None:
    emitter.scalar(key)
    emitter.start_mapping()
    emitter.key_string_set("rpms", rpms)
    emitter.end_mapping()


def _emit_components(stream: ModuleStream, emitter: Emitter) -> None:
    emitter.scalar("components")
    emitter.start_mapping()

    if stream.rpm_components:
        emitter.scalar("rpms")
        emitter.start_mapping()
        for key in sorted(stream.rpm_components):
            rpm = stream.rpm_components[key]
            emitter.scalar(key)
            emitter.start_mapping()
            emitter.key_value("rationale", rpm.rationale)
            emitter.key_value("name", rpm.name)
            emitter.key_value("repository", rpm.repository)
            emitter.key_value("cache", rpm.cache)
            emitter.key_value("ref", rpm.ref)
            _emit_build_ordering(rpm, emitter)
            if rpm.buildonly:
                emitter.key_value("buildonly", "true")
            if rpm.arches:
                emitter.key_string_set("arches", rpm.arches, flow=True)
            if rpm.multilib:
                emitter.key_string_set("multilib", rpm.multilib, flow=True)
            emitter.end_mapping()
        emitter.end_mapping()

    if stream.module_components:
        emitter.scalar("modules")
        emitter.start_mapping()
        for key in sorted(stream.module_components):
            module = stream.module_components[key]
            emitter.scalar(key)
            emitter.start_mapping()
            emitter.key_value("rationale", module.rationale)
            emitter.key_value("repository", module.repository)
            emitter.key_value("ref", module.ref)
            _emit_build_ordering(module, emitter)
            emitter.end_mapping()
        emitter.end_mapping()

    emitter.end_mapping()


def _emit_build_ordering(component: ComponentRpm | ComponentModule, emitter: Emitter) -> None:
    if component.buildorder:
        emitter.key_value("buildorder", component.buildorder)
    if component.buildafter:
        emitter.key_string_set("buildafter", component.buildafter)


def _emit_rpm_map(rpm_map: dict[str, dict[str, RpmMapEntry]], emitter: Emitter) -> None:
    emitter.scalar("rpm-map")
    emitter.start_mapping()
    for digest_type in sorted(rpm_map):
        emitter.scalar(digest_type)
        emitter.start_mapping()
        entries = rpm_map[digest_type]
        for digest in sorted(entries):
            entry = entries[digest]
            emitter.scalar(digest)
            emitter.start_mapping()
            emitter.key_value("name", entry.name)
            emitter.key_value("epoch", entry.epoch)
            emitter.key_value("version", entry.version)
            emitter.key_value("release", entry.release)
            emitter.key_value("arch", entry.arch)
            emitter.key_value("nevra", entry.nevra)
            emitter.end_mapping()
        emitter.end_mapping()
    emitter.end_mapping()
