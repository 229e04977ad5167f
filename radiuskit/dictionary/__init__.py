"""FreeRADIUS dictionary model, parser, errors and lookup helpers."""