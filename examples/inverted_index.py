"""
Inverted index MapReduce example.
Creates an index mapping each word to the documents it appears in.
map_function is kept to produce intermediate files for the integration tests;
this package has no map stage.
"""

import string


def map_function(key, value):
    """
    Map function: emit (word, document_id) for each word.

    Args:
        key: Document name
        value: Document text

    Yields:
        (word, document_id) tuples
    """
    words = value.translate(str.maketrans('', '', string.punctuation)).split()

    for word in words:
        if word:
            yield (word.lower(), key)


def reduce_function(key, values):
    """
    Reduce function: list the documents a word appears in.

    Returns:
        "<count> <doc1>,<doc2>,..." with unique, sorted document IDs
    """
    unique_docs = sorted(set(values))
    return f"{len(unique_docs)} {','.join(unique_docs)}"
