"""Parse a BibTeX entry in 3 lines: zero config, zero deps."""

from bibx import parse

(book,) = parse("@book{b1, author = {A. Author}, year = 1999}")
print(book.type_name, book.cite_key, book.get("author"))
