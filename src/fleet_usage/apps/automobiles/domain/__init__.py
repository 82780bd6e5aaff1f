# Domain package for automobiles
