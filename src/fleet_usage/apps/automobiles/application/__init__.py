# Application package for automobiles
