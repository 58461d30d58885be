"""Training corpus loading, training set assembly and the classifier."""
