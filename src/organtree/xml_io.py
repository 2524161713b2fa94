"""XML parameter files and RSML export."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Union

from .errors import MalformedInputError, OrganTypeNameError
from .parameters import PARAMETER_CLASSES, OrganTypeParameter, organ_type_name, organ_type_number

if TYPE_CHECKING:
    from .organism import Organism

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parameter_from_xml(element: ET.Element) -> OrganTypeParameter:
    """Build an unregistered organ type parameter from one organ type tag."""
    ot = organ_type_number(element.tag)
    otp = PARAMETER_CLASSES[ot]()
    if "name" in element.attrib:
        otp.name = element.attrib["name"]
    if "subType" in element.attrib:
        otp.set_parameter("subType", element.attrib["subType"])
    for child in element.iter("parameter"):
        try:
            name = child.attrib["name"]
            value = child.attrib["value"]
        except KeyError as exc:
            raise MalformedInputError(f"<parameter> in <{element.tag}> lacks attribute {exc}") from None
        try:
            otp.set_parameter(name, value)
        except LookupError as exc:
            raise MalformedInputError(str(exc)) from None
        except ValueError as exc:
            raise MalformedInputError(f"invalid value {value!r} for parameter {name!r} of <{element.tag}>: {exc}") from None
    return otp


def parameter_to_xml(otp: OrganTypeParameter, comments: bool = True) -> ET.Element:
    element = ET.Element(organ_type_name(otp.organ_type), {"name": otp.name, "subType": str(otp.sub_type)})
    descriptions = otp.descriptions()
    for key in list(otp.iparam) + list(otp.dparam):
        if key in ("organType", "subType"):
            continue
        value = otp.get_parameter(key)
        text = str(int(value)) if key in otp.iparam else repr(value)
        if comments and descriptions.get(key):
            element.append(ET.Comment(f" {descriptions[key]} "))
        ET.SubElement(element, "parameter", {"name": key, "value": text})
    return element


def read_parameters(organism: "Organism", path: PathLike, basetag: str = "plant") -> list[OrganTypeParameter]:
    """Register every organ type parameter of the file ``path`` in ``organism``.

    The whole file is parsed before anything is registered, so a malformed
    file leaves the organism's parameters untouched.
    """
    path = Path(path)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as exc:
        logger.error("could not read parameter file %s: %s", path, exc)
        raise MalformedInputError(f"could not read parameter file {path}: {exc}") from exc

    base = root if root.tag == basetag else root.find(basetag)
    if base is None:
        logger.error("parameter file %s has no <%s> tag", path, basetag)
        raise MalformedInputError(f"parameter file {path} has no <{basetag}> tag")

    params = []
    for element in base:
        if not isinstance(element.tag, str):
            continue
        logger.debug("reading tag %s", element.tag)
        try:
            params.append(parameter_from_xml(element))
        except (MalformedInputError, OrganTypeNameError) as exc:
            logger.error("parameter file %s: %s", path, exc)
            raise MalformedInputError(f"parameter file {path}: {exc}") from exc

    for otp in params:
        organism.set_organ_type_parameter(otp)
    return params


def write_parameters(organism: "Organism", path: PathLike, basetag: str = "plant", comments: bool = True) -> None:
    root = ET.Element(basetag)
    for ot in sorted(organism.organ_param):
        for otp in organism.get_organ_type_parameters(ot):
            root.append(parameter_to_xml(otp, comments))
    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(Path(path), encoding="utf-8", xml_declaration=True)


def rsml_metadata() -> ET.Element:
    metadata = ET.Element("metadata")
    ET.SubElement(metadata, "version").text = "1"
    ET.SubElement(metadata, "unit").text = "cm"
    ET.SubElement(metadata, "resolution").text = "1"
    ET.SubElement(metadata, "last-modified").text = date.today().strftime("%d-%m-%Y")
    ET.SubElement(metadata, "software").text = "organtree"
    return metadata


def rsml_scene(organism: "Organism") -> ET.Element:
    scene = ET.Element("scene")
    plant = ET.SubElement(scene, "plant")
    for organ in organism.base_organs:
        organ.write_rsml(plant)
    return scene


def write_rsml(organism: "Organism", path: PathLike) -> None:
    rsml = ET.Element("rsml")
    rsml.append(rsml_metadata())
    rsml.append(rsml_scene(organism))
    tree = ET.ElementTree(rsml)
    ET.indent(tree)
    tree.write(Path(path), encoding="utf-8", xml_declaration=True)
