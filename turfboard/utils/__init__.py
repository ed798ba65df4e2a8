# turfboard/utils/__init__.py
