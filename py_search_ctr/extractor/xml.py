# Copyright 2025 Gowtham Rao <rao@ohdsi.org>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Converts registry XML into plain nested mappings."""

from typing import Any

from lxml import etree as ET

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"


def _element_to_value(element: ET._Element) -> Any:
    """Recursively turn an element into a str, or a dict for structured nodes.

    Repeated child tags collapse into a list, so a registry returning one
    ``<trial>`` yields a mapping while several yield a list of mappings.
    """
    children = list(element.iterchildren(tag=ET.Element))
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text

    value: dict[str, Any] = {}
    for name, attr in element.attrib.items():
        value[ATTRIBUTE_PREFIX + ET.QName(name).localname] = attr

    for child in children:
        key = ET.QName(child).localname
        child_value = _element_to_value(child)
        if key not in value:
            value[key] = child_value
        elif isinstance(value[key], list):
            value[key].append(child_value)
        else:
            value[key] = [value[key], child_value]

    if text:
        value[TEXT_KEY] = text
    return value


def xml_to_dict(xml_content: bytes | str) -> dict[str, Any]:
    """Parse well-formed XML into ``{root_tag: value}``.

    Raises:
        lxml.etree.XMLSyntaxError: if the document is not well-formed.
    """
    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")
    parser = ET.XMLParser(resolve_entities=False, no_network=True)
    root = ET.fromstring(xml_content, parser=parser)
    return {ET.QName(root).localname: _element_to_value(root)}
