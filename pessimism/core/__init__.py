"""Core types, identifiers, state keys, registers, transit data and configs."""