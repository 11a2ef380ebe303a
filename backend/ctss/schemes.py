"""
Declarative table of the supported Clinical Table Search Service vocabularies.

Each Scheme carries the upstream table name, the default field selections, how
the display column becomes the row's primary attribute, and the extra columns
it knows about (wire name -> result attribute name, plus value shape).
"""
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .errors import ValidationError


class FieldShape(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class FieldSpec(BaseModel):
    wire: str
    name: str
    # descriptive only, values are passed through as decoded
    shape: FieldShape = FieldShape.STRING


class Scheme(BaseModel):
    method: str
    table: str
    label: str

    search_fields: Optional[str] = None
    display_fields: Optional[str] = None
    code_field: Optional[str] = None

    # joined:  ["a", "b"] -> "a | b"
    # label:   ["code", "text"] -> "text"
    # columns: positional display columns -> attributes
    display_rule: Literal["joined", "label", "columns"] = "joined"
    display_attr: str = "display"
    display_columns: List[Optional[str]] = Field(default_factory=list)
    code_alias: Optional[str] = None

    fields: List[FieldSpec] = Field(default_factory=list)
    # copy unknown extra columns under their wire names
    passthrough: bool = False

    max_list_default: int = 7
    count_default: int = 7
    always_count: bool = False

    type_choices: List[str] = Field(default_factory=list)
    default_type: Optional[str] = None
    available_types: List[str] = Field(default_factory=list)
    supports_exclude_copyrighted: bool = False


def _f(wire: str, name: Optional[str] = None, shape: FieldShape = FieldShape.STRING) -> FieldSpec:
    return FieldSpec(wire=wire, name=name or wire, shape=shape)


B, A = FieldShape.BOOLEAN, FieldShape.ARRAY


_NPI_FIELDS = [
    _f("name.last", "lastName"),
    _f("name.first", "firstName"),
    _f("name.middle", "middleName"),
    _f("name.credential", "credential"),
    _f("name.prefix", "namePrefix"),
    _f("name.suffix", "nameSuffix"),
    _f("addr_practice.line1", "practiceAddressLine1"),
    _f("addr_practice.line2", "practiceAddressLine2"),
    _f("addr_practice.city", "practiceCity"),
    _f("addr_practice.state", "practiceState"),
    _f("addr_practice.zip", "practiceZip"),
    _f("addr_practice.phone", "practicePhone"),
    _f("addr_practice.fax", "practiceFax"),
    _f("addr_practice.country", "practiceCountry"),
    _f("addr_mailing.full", "mailingAddress"),
    _f("addr_mailing.line1", "mailingAddressLine1"),
    _f("addr_mailing.line2", "mailingAddressLine2"),
    _f("addr_mailing.city", "mailingCity"),
    _f("addr_mailing.state", "mailingState"),
    _f("addr_mailing.zip", "mailingZip"),
    _f("addr_mailing.phone", "mailingPhone"),
    _f("addr_mailing.fax", "mailingFax"),
    _f("addr_mailing.country", "mailingCountry"),
    _f("name_other.full", "otherNameFull"),
    _f("name_other.last", "otherNameLast"),
    _f("name_other.first", "otherNameFirst"),
    _f("name_other.middle", "otherNameMiddle"),
    _f("name_other.credential", "otherNameCredential"),
    _f("name_other.prefix", "otherNamePrefix"),
    _f("name_other.suffix", "otherNameSuffix"),
    _f("other_ids", "otherIds", A),
    _f("licenses", "licenses", A),
    _f("misc.auth_official.last", "authorizedOfficialLast"),
    _f("misc.auth_official.first", "authorizedOfficialFirst"),
    _f("misc.auth_official.middle", "authorizedOfficialMiddle"),
    _f("misc.auth_official.credential", "authorizedOfficialCredential"),
    _f("misc.auth_official.title", "authorizedOfficialTitle"),
    _f("misc.auth_official.prefix", "authorizedOfficialPrefix"),
    _f("misc.auth_official.suffix", "authorizedOfficialSuffix"),
    _f("misc.auth_official.phone", "authorizedOfficialPhone"),
    _f("misc.replacement_NPI", "replacementNPI"),
    _f("misc.EIN", "ein"),
    _f("misc.enumeration_date", "enumerationDate"),
    _f("misc.last_update_date", "lastUpdateDate"),
    _f("misc.is_sole_proprietor", "isSoleProprietor", B),
    _f("misc.is_org_subpart", "isOrgSubpart", B),
    _f("misc.parent_LBN", "parentLBN"),
    _f("misc.parent_TIN", "parentTIN"),
]

_NPI_DEFAULT_FIELDS = "NPI,name.full,provider_type,addr_practice.full"

_NPI_COMMON = dict(
    search_fields=_NPI_DEFAULT_FIELDS,
    display_fields=_NPI_DEFAULT_FIELDS,
    code_field="NPI",
    display_rule="columns",
    display_attr="fullName",
    display_columns=[None, "fullName", "providerType", "practiceAddress"],
    code_alias="npi",
    always_count=True,
)

_CONDITION_FIELDS = [
    _f("primary_name"),
    _f("consumer_name"),
    _f("key_id"),
    _f("term_icd9_code"),
    _f("term_icd9_text"),
    _f("word_synonyms"),
    _f("synonyms"),
    _f("info_link_data", shape=A),
]


SCHEMES: Dict[str, Scheme] = {
    s.method: s
    for s in [
        Scheme(
            method="icd-10-cm",
            table="icd10cm",
            label="ICD-10-CM codes",
            search_fields="code,name",
            display_fields="code,name",
            code_field="code",
            display_rule="label",
            display_attr="name",
        ),
        Scheme(
            method="icd-11",
            table="icd11_codes",
            label="ICD-11",
            search_fields="code,title",
            display_fields="code,title,type",
            code_field="code",
            passthrough=True,
            fields=[
                _f("title"), _f("definition"), _f("type"), _f("chapter"),
                _f("entityId"), _f("source"), _f("browserUrl"), _f("parent"),
            ],
            type_choices=["stem", "extension", "category"],
            default_type="category",
        ),
        Scheme(
            method="hcpcs-LII",
            table="hcpcs",
            label="HCPCS Level II codes",
            search_fields="code,short_desc,long_desc",
            display_fields="code,display",
            code_field="code",
            display_rule="label",
            fields=[
                _f("short_desc", "shortDescription"),
                _f("long_desc", "longDescription"),
                _f("add_dt", "addDate"),
                _f("term_dt", "termDate"),
                _f("act_eff_dt", "actualEffectiveDate"),
                _f("obsolete", "obsolete", B),
                _f("is_noc", "isNoc", B),
            ],
            always_count=True,
        ),
        Scheme(
            method="npi-organizations",
            table="npi_org",
            label="NPI Organization records",
            fields=_NPI_FIELDS,
            **_NPI_COMMON,
        ),
        Scheme(
            method="npi-individuals",
            table="npi_idv",
            label="NPI Individual records",
            fields=[_f("gender")] + _NPI_FIELDS,
            **_NPI_COMMON,
        ),
        Scheme(
            method="hpo-vocabulary",
            table="hpo",
            label="HPO Vocabulary",
            passthrough=True,
            fields=[
                _f("definition"), _f("def_xref", shape=A), _f("created_by"),
                _f("creation_date"), _f("comment"), _f("is_obsolete", shape=B),
                _f("replaced_by"), _f("consider", shape=A), _f("alt_id", shape=A),
                _f("synonym", shape=A), _f("is_a", shape=A), _f("xref", shape=A),
                _f("property", shape=A),
            ],
        ),
        Scheme(
            method="conditions",
            table="conditions",
            label="Conditions",
            passthrough=True,
            fields=_CONDITION_FIELDS + [_f("icd10cm_codes"), _f("icd10cm", shape=A)],
        ),
        Scheme(
            method="rx-terms",
            table="rxterms",
            label="RxTerms",
            search_fields="DISPLAY_NAME,DISPLAY_NAME_SYNONYM",
            display_fields="DISPLAY_NAME",
            code_field="DISPLAY_NAME",
            passthrough=True,
            fields=[
                _f("STRENGTHS_AND_FORMS", shape=A), _f("RXCUIS", shape=A),
                _f("SXDG_RXCUI"), _f("DISPLAY_NAME_SYNONYM", shape=A),
            ],
        ),
        Scheme(
            method="loinc-questions",
            table="loinc_items",
            label="LOINC Questions",
            search_fields="text,COMPONENT,CONSUMER_NAME,RELATEDNAMES2,METHOD_TYP,SHORTNAME,LONG_COMMON_NAME,LOINC_NUM",
            display_fields="text",
            code_field="LOINC_NUM",
            passthrough=True,
            fields=[
                _f("text"), _f("LOINC_NUM"), _f("RELATEDNAMES2"), _f("PROPERTY"),
                _f("METHOD_TYP"), _f("AnswerLists", shape=A), _f("units", shape=A),
                _f("datatype"), _f("isCopyrighted", shape=B), _f("containsCopyrighted", shape=B),
                _f("CONSUMER_NAME"), _f("LONG_COMMON_NAME"), _f("SHORTNAME"), _f("COMPONENT"),
                _f("EXTERNAL_COPYRIGHT_NOTICE"), _f("EXTERNAL_COPYRIGHT_LINK"),
            ],
            type_choices=["question", "form", "form_and_section", "panel"],
            available_types=["form", "form_and_section"],
            supports_exclude_copyrighted=True,
        ),
        Scheme(
            method="ncbi-genes",
            table="ncbi_genes",
            label="NCBI Genes",
            search_fields="GeneID,Symbol,Synonyms,description,chromosome,map_location,type_of_gene,HGNC_ID,dbXrefs",
            display_fields="_code_system,_code,chromosome,Symbol,description,type_of_gene",
            code_field="GeneID",
            passthrough=True,
            fields=[
                _f("GeneID"), _f("HGNC_ID"), _f("Symbol"), _f("Synonyms"), _f("dbXrefs"),
                _f("chromosome"), _f("map_location"), _f("description"), _f("type_of_gene"),
                _f("na_symbol"), _f("na_name"), _f("Other_designations"),
                _f("Modification_date"), _f("_code_system"), _f("_code"),
            ],
        ),
        Scheme(
            method="major-surgeries-implants",
            table="procedures",
            label="Major Surgeries and Implants",
            search_fields="consumer_name,primary_name,word_synonyms,synonyms,term_icd9_code,term_icd9_text",
            display_fields="consumer_name",
            code_field="key_id",
            passthrough=True,
            fields=_CONDITION_FIELDS,
        ),
    ]
}

METHODS = list(SCHEMES)


def get_scheme(method: str) -> Scheme:
    if not isinstance(method, str) or not method:
        raise ValidationError('The "method" parameter is required and must be a string')
    try:
        return SCHEMES[method]
    except KeyError:
        allowed = ", ".join(f'"{m}"' for m in METHODS)
        raise ValidationError(f'The "method" parameter must be one of: {allowed}') from None
