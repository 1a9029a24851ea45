"""Typed declarations: expand @string abbreviations in entry fields."""

from bibx import BibTeX
from bibx.nodes import AbbrevDecl, EntryDecl, PreambleDecl

source = """
% Journal names used below
@string{jacm = "Journal of the ACM"}
@preamble{"\\newcommand{\\noopsort}[1]{}"}

@article{knuth1977,
  author  = {Donald E. Knuth},
  title   = {Fast Pattern Matching in Strings},
  journal = jacm,
  year    = 1977
}
"""


def _strip_delimiters(value: str) -> str:
    if value[:1] in "{\"" and value[-1:] in "}\"":
        return value[1:-1]
    return value


# Bare references such as journal = jacm need relaxed field values
bib = BibTeX(strict_field_values=False)
strings: dict[str, str] = {}

for decl in bib.iter(source):
    match decl:
        case AbbrevDecl(field=field):
            strings[field.key.lower()] = _strip_delimiters(field.value)
        case PreambleDecl(value=value):
            print(f"preamble: {value}")
        case EntryDecl():
            print(f"{decl.type_name} {decl.cite_key}")
            for stmt in decl.fields:
                value = strings.get(stmt.value.lower(), _strip_delimiters(stmt.value))
                print(f"  {stmt.key}: {value}")
