"""
Classic MapReduce word count example.
Counts the frequency of each word in the input text.
map_function is kept to produce intermediate files for the integration tests;
this package has no map stage.
"""

import string


def map_function(key, value):
    """
    Map function: emit (word, "1") for each word in the line.

    Args:
        key: Line number (unused)
        value: Text line

    Yields:
        (word, "1") tuples
    """
    # Remove punctuation and split into words
    words = value.translate(str.maketrans('', '', string.punctuation)).split()

    for word in words:
        if word:  # Skip empty strings
            yield (word.lower(), "1")


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Args:
        key: Word
        values: List of counts as strings

    Returns:
        Total count as a string
    """
    return str(sum(int(v) for v in values))
