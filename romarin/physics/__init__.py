"""Compact MOSFET models: level-1, threshold and surface-potential."""