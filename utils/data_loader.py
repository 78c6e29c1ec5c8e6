import gzip


def load_sequence(path, size_limit=None):
    """Read whitespace-separated integers from a text or .gz file."""
    opener = gzip.open if str(path).endswith(".gz") else open
    values = []
    with opener(path, 'rt', encoding='latin-1') as f:
        for line in f:
            for token in line.split():
                values.append(int(token))
                if size_limit and len(values) >= size_limit:
                    return values
    return values
