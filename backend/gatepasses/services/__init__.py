# Services package for gate passes
