"""
File-system side of zik: tag readers, metadata extraction and library scanning
"""
