"""
Core Package.

Contains the rewrite logic:
- Call Splitter and Text Normalizers
- Patch Emitter
- Detector front ends (recorded matches, lexical scanner)
- Migration Engine and Trace Logger
"""
