"""Allow ``python -m url_digester`` as an alias for the ``url-digester`` command."""

from url_digester.cli import main

main()
